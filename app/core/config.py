import json
from typing import List, Optional

from atams import AtamsBaseSettings


class Settings(AtamsBaseSettings):
    """
    Application Settings

    Inherits from AtamsBaseSettings which includes:
    - DATABASE_URL (required)
    - ATLAS_SSO_URL, ATLAS_APP_CODE, ATLAS_ENCRYPTION_KEY, ATLAS_ENCRYPTION_IV
    - ENCRYPTION_ENABLED, ENCRYPTION_KEY, ENCRYPTION_IV (response encryption)
    - LOGGING_ENABLED, LOG_LEVEL, LOG_TO_FILE, LOG_FILE_PATH
    - CORS_ORIGINS, CORS_ALLOW_CREDENTIALS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS
    - RATE_LIMIT_ENABLED, RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW
    - DEBUG

    All settings can be overridden via .env file or by redefining them here.
    """
    APP_NAME: str
    APP_VERSION: str
    DEBUG: bool

    # Face++ compare API (checked per request, not at startup)
    FACEPP_API_KEY: Optional[str] = None
    FACEPP_API_SECRET: Optional[str] = None
    FACEPP_COMPARE_URL: str = "https://api-us.faceplusplus.com/facepp/v3/compare"
    FACEPP_TIMEOUT_SECONDS: float = 30.0

    # Face matching
    FACE_MATCH_CONFIDENCE_THRESHOLD: float = 70.0
    FACE_SCAN_DEFAULT_THRESHOLD: float = 62.327
    ALLOWED_IMAGE_HOSTS: str = '["i.ibb.co", "ibb.co"]'

    # Attendance day boundaries (fixed offset, Asia/Kuala_Lumpur)
    ATTENDANCE_UTC_OFFSET_HOURS: int = 8

    # Geofence settings
    DEFAULT_GEOFENCE_RADIUS_M: int = 500

    # Scheduler authentication
    CRON_API_KEY: str

    # Identity provider (Supabase Auth admin API)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    IDENTITY_TIMEOUT_SECONDS: float = 15.0

    # Image hosting (ImgBB upload API)
    IMGBB_API_KEY: Optional[str] = None
    IMGBB_UPLOAD_URL: str = "https://api.imgbb.com/1/upload"
    IMGBB_TIMEOUT_SECONDS: float = 30.0
    MAX_IMAGE_UPLOAD_BYTES: int = 10 * 1024 * 1024

    @property
    def allowed_image_hosts_list(self) -> List[str]:
        try:
            return json.loads(self.ALLOWED_IMAGE_HOSTS)
        except ValueError:
            return ["i.ibb.co", "ibb.co"]


settings = Settings()
