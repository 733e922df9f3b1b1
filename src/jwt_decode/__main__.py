"""
Top-level entry point: python -m jwt_decode <token>
"""

from .cli import main


if __name__ == "__main__":
    main()
