from dotenv import load_dotenv
import os

load_dotenv()

LOG_LEVEL = os.environ.get('EXIMGPDF_LOG_LEVEL', 'INFO').upper()
PDF_LOG_LEVEL = os.environ.get('EXIMGPDF_PDF_LOG_LEVEL', 'WARNING').upper()
PROGRESS = os.environ.get('EXIMGPDF_PROGRESS', '').strip().lower() in {'1', 'true', 'yes', 'on'}
