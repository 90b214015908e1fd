"""
Configuration file for pytest.

Keeps the project root importable (for history_cli) and loads environment
variables from a local .env file before any test module is collected.
"""
import dotenv

# Load environment variables from .env file
dotenv.load_dotenv()
