"""BGZF on-disk constants.

Single source of truth for the block marker, header layout and EOF block.
Keep this file stable. Reader and writer must remain synchronized.
"""

# Block header: gzip magic, CM=deflate, FLG=FEXTRA, MTIME=0, XFL=0, OS=255,
# XLEN=6, then the BC subfield id and its length (2).
BLOCK_MARKER = b"\x1f\x8b\x08\x04\x00\x00\x00\x00\x00\xff\x06\x00BC\x02\x00"
MARKER_LEN = 16

# Header: [Marker(16) | BSIZE-1 (u16 LE)] = 18 bytes
HEADER_FMT = "<16sH"
HEADER_LEN = 18

# Trailer: [CRC32 (u32 LE) | ISIZE (u32 LE)] = 8 bytes
TRAILER_FMT = "<II"
TRAILER_LEN = 8

# BSIZE is stored minus one in a u16
MAX_BLOCK_SIZE = 64 * 1024

# Largest payload bgzip puts in one block; leaves room for incompressible data
MAX_BLOCK_DATA = 0xFF00

# Empty block appended by writers to mark logical end of stream
EOF_BLOCK = BLOCK_MARKER + b"\x1b\x00\x03\x00" + b"\x00" * 8

# Backward scan step used to find a header near EOF
SCAN_WINDOW = MAX_BLOCK_SIZE // 2
