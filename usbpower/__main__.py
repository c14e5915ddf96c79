import sys

from usbpower.cli.main import main

sys.exit(main())
