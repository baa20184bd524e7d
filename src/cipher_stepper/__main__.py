"""Main entry point for the cipher_stepper package."""
from cipher_stepper.cli import main


if __name__ == "__main__":
    main()
