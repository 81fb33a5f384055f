ERRORS = {
  "E_CONFIG": "Invalid configuration",
  "E_NOT_FOUND": "File missing or unreadable",
  "E_FORMAT": "Not a valid BGZF file",
}

EXIT_CODES = {
  "E_CONFIG": 2,
  "E_NOT_FOUND": 1,
  "E_FORMAT": 3,
}
