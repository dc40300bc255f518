"""Allow ``python -m gemini_samples``."""

from gemini_samples.cli.main import main


main()
