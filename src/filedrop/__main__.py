"""``python -m filedrop`` — same as the ``filedrop`` command."""

from filedrop.cli import main

main()
