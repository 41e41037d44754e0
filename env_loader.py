"""Merkezi .env yukleyici. Tum giris noktalari bunu import etsin."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Proje kokundeki .env dosyasini bul ve yukle (ortam degiskenlerini ezmez)
_env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(_env_path, override=False)

REGION = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")
LOG_BUCKET = os.environ.get("SALES_INTEL_LOG_BUCKET")
