"""
Transforms sub-package for omie-ingest.

Pure functions that turn raw document text into canonical values.
Parsers compose them; none of them hold state.

- numbers.py: Locale-formatted decimals and hour indexes.
- dates.py: DD/MM/YYYY tokens in header lines.
- text.py: ISO-8859-1 decoding, line and field splitting.

Why separate modules:
- Each step is independently testable.
- The numeric heuristic is the most era-sensitive piece of the library
  and is easier to audit in isolation.
"""
