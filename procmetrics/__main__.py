"""Run the CLI: python -m procmetrics"""

from .main import main

if __name__ == "__main__":
    main()
