# airnope/__main__.py
import sys

from airnope.main import main

sys.exit(main())
