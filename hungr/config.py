import os

from dotenv import load_dotenv

load_dotenv()

class Config:
    DEFAULT_OPENAI_MODEL = 'gpt-4o-mini'
    DEFAULT_OPENAI_BASE_URL = 'https://api.openai.com/v1'
    DEFAULT_MAX_UPLOAD_BYTES = 32 * 1024 * 1024

    def __init__(self):
        self.env = os.environ.get('HUNGR_ENV', 'development')
        self.log_level = os.environ.get(
            'HUNGR_LOG_LEVEL',
            'INFO' if self.env == 'production' else 'DEBUG'
        )

        self.openai_api_key: str | None = os.environ.get('OPENAI_API_KEY') or None
        self.openai_model = os.environ.get('OPENAI_MODEL', self.DEFAULT_OPENAI_MODEL)
        self.openai_base_url = os.environ.get('OPENAI_BASE_URL', self.DEFAULT_OPENAI_BASE_URL)

        self.max_upload_bytes = int(
            os.environ.get('HUNGR_MAX_UPLOAD_BYTES', self.DEFAULT_MAX_UPLOAD_BYTES)
        )

    @property
    def database_url(self) -> str:
        url = os.environ.get('DATABASE_URL')
        if url:
            return url

        db_password = os.environ.get('HUNGR_DATABASE_PASSWORD')
        if db_password is None:
            raise Exception('Please, set either `DATABASE_URL` or the `HUNGR_DATABASE_PASSWORD` environment variable. You may use the `.env` file for your convenience.')

        db_user = os.environ.get('HUNGR_DATABASE_USER', 'postgres')
        db_name = os.environ.get('HUNGR_DATABASE_NAME', 'hungr')
        db_host = os.environ.get('HUNGR_DATABASE_HOST', 'localhost')
        db_port = os.environ.get('HUNGR_DATABASE_PORT', '5432')

        return f'postgresql+psycopg2://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}'
