import sys

from .autoplay import main

sys.exit(main())
