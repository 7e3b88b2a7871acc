import sys

from kafka_console.cli import main

sys.exit(main())
