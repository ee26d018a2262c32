import sys

from camera_controls.main_controls import main

sys.exit(main())
