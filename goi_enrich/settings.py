"""
Default paths and runtime settings for goi-enrich.

All paths hang off DATA_DIR, which can be moved with the
GOI_ENRICH_DATA_DIR environment variable. CLI flags override these.
"""

import os
from pathlib import Path


PROJECT_ROOT = Path(__file__).parent.parent

DATA_DIR = Path(os.environ.get('GOI_ENRICH_DATA_DIR', PROJECT_ROOT / 'data'))

# Raw sources
JMDICT_PATH = DATA_DIR / 'JMdict_e.xml'
KANJIDIC_PATH = DATA_DIR / 'kanjidic2.xml'
TATOEBA_DIR = DATA_DIR / 'tatoeba'
PITCH_PATH = DATA_DIR / 'pitch-accents.json'
WORD_LIST_DIR = DATA_DIR / 'jlpt'

# Built artifacts
INDEX_DIR = DATA_DIR / 'index'

DEFAULT_WORKERS = 4

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
