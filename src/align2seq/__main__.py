import sys

from align2seq.cli import main

sys.exit(main())
