import os
import yaml
from pathlib import Path
from dotenv import load_dotenv

load_dotenv('.env')

# Automatically load when module is imported
_CONFIG_PATH = Path(os.environ.get(
  'NEWS_PORTAL_CONFIG',
  Path(__file__).parent.parent.parent.parent / 'config' / 'config.yaml'
))
with open(_CONFIG_PATH, 'r', encoding='utf-8') as f:
  CONFIG = yaml.safe_load(f)
