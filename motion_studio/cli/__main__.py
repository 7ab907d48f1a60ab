"""Allow running CLI as: python -m motion_studio.cli"""

import sys

# Load .env file from the working directory before anything else
from dotenv import load_dotenv

load_dotenv()

from .main import main

sys.exit(main())
