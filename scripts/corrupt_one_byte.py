import sys
from pathlib import Path

def main():
    if len(sys.argv) != 2:
        print("Usage: corrupt_one_byte.py <file>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < 18:
        print("File too small to corrupt safely.")
        raise SystemExit(2)

    # Flip a byte inside the first block marker (the BC subfield id).
    # Block header is 18 bytes: 16 marker bytes then the size field.
    # A reader must reject the file as not BGZF.
    idx = 12
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
