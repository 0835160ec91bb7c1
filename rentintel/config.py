# rentintel/config.py
from dotenv import load_dotenv
import os

load_dotenv()

# Runtime parameters
BATCH_SIZE = int(os.getenv("BATCH_SIZE", "15"))
MATCH_WORKERS = int(os.getenv("MATCH_WORKERS", "8"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Match decision thresholds (0-100 scale)
MATCH_THRESHOLD = int(os.getenv("MATCH_THRESHOLD", "60"))
FALLBACK_MATCH_THRESHOLD = int(os.getenv("FALLBACK_MATCH_THRESHOLD", "40"))

# File names
INPUT_CSV = os.getenv("INPUT_CSV", "candidates.csv")
OUTPUT_CSV = os.getenv("OUTPUT_CSV", "candidate_matches.csv")
