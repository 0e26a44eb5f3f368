import os

# ------------------------------------------------------------
# Configuration
# ------------------------------------------------------------

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'supersecretkey') # Flask session key, override outside development
    SQLALCHEMY_DATABASE_URI = os.getenv('INVENTORY_DATABASE_URL', 'sqlite:///inventory.db') # holds the key-value storage table
    SQLALCHEMY_TRACK_MODIFICATIONS = False # disable tracking of modifications, saves system resources

    SESSION_TYPE = 'cachelib' # server-side sessions, the cookie only carries the session id
    SESSION_FILE_DIR = os.getenv('SESSION_FILE_DIR', 'flask_session')
    SESSION_PERMANENT = False # sessions end with the browser

    CURRENCY_SYMBOL = os.getenv('CURRENCY_SYMBOL', 'M')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
