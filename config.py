import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", os.urandom(32).hex())
    SYNAPOMORPHIA_VAULT_PATH = os.environ.get("SYNAPOMORPHIA_VAULT_PATH", BASE_DIR)
