"""Main entry point for the trainer."""
from lemot.app import app


if __name__ == "__main__":
    app(prog_name="lemot")
