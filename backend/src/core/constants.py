"""Application constants and configuration values."""

from core.config import FRONTEND_URL

# Database field lengths
MAX_STRING_LENGTH = 255

# Database connection settings
DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes

# CORS origins for development and production
_CORS_ORIGINS_RAW = [
    "http://localhost:5173",      # React dev server (Vite)
    FRONTEND_URL,
]

# Filter out None values and empty strings to avoid CORS errors
CORS_ORIGINS = [origin for origin in _CORS_ORIGINS_RAW if origin and origin.strip()]

# Well guide statuses (stored in patient_well_guides.status)
WELL_GUIDE_STATUS_SCHEDULED = "scheduled"
WELL_GUIDE_STATUS_UP_TO_DATE = "uptodate"
WELL_GUIDE_STATUS_DUE_IN_ONE_MONTH = "dueInOneMonth"
WELL_GUIDE_STATUS_DUE_FOR_A_VISIT = "dueForAVisit"

# Recurrence period, in whole months, keyed by well_guides.id
WELL_GUIDE_RECURRENCE_MONTHS = {
    1: 12,   # Annual physical
    2: 6,    # Dental cleaning
    3: 24,   # Eye exam
    4: 12,   # Mammogram
    5: 36,   # Cervical screening
    6: 120,  # Colonoscopy
    7: 12,   # Skin check
}

# Display metadata used to seed the well_guides table
WELL_GUIDE_SEED_DATA = [
    {"id": 1, "name": "Annual Physical", "speciality": "Primary Care",
     "description": "Yearly check-up with your primary care provider.",
     "image_url": "/images/well-guide/annual-physical.png"},
    {"id": 2, "name": "Dental Cleaning", "speciality": "Dentistry",
     "description": "Professional cleaning and oral exam every six months.",
     "image_url": "/images/well-guide/dental-cleaning.png"},
    {"id": 3, "name": "Eye Exam", "speciality": "Optometry",
     "description": "Comprehensive eye exam every two years.",
     "image_url": "/images/well-guide/eye-exam.png"},
    {"id": 4, "name": "Mammogram", "speciality": "Radiology",
     "description": "Breast cancer screening.",
     "image_url": "/images/well-guide/mammogram.png"},
    {"id": 5, "name": "Cervical Screening", "speciality": "Gynecology",
     "description": "Pap test for cervical cancer screening.",
     "image_url": "/images/well-guide/cervical-screening.png"},
    {"id": 6, "name": "Colonoscopy", "speciality": "Gastroenterology",
     "description": "Colorectal cancer screening.",
     "image_url": "/images/well-guide/colonoscopy.png"},
    {"id": 7, "name": "Skin Check", "speciality": "Dermatology",
     "description": "Full-body skin cancer screening.",
     "image_url": "/images/well-guide/skin-check.png"},
]

# Follow-up cadence after a patient enables reminders
DUE_IN_ONE_MONTH_FOLLOW_UP_DAYS = 7
DUE_FOR_A_VISIT_FOLLOW_UP_DAYS = 14

# Average Gregorian month length in days (146097 days per 400 years / 4800 months)
AVERAGE_DAYS_PER_MONTH = 146097 / 4800

# Maximum accepted UTC offset for submitted appointment timestamps
MAX_UTC_OFFSET_MINUTES = 16 * 60

# API versions for PUT /well-guide/{patient_id}
WELL_GUIDE_API_VERSION_HEADER = "X-API-Version"
WELL_GUIDE_API_VERSION_1_0_0 = "1.0.0"
WELL_GUIDE_API_VERSION_1_1_0 = "1.1.0"
WELL_GUIDE_API_LATEST_VERSION = WELL_GUIDE_API_VERSION_1_1_0
DEFAULT_UTC_OFFSET = "+00:00"

# Status refresh scheduler settings
WELL_GUIDE_REFRESH_MAX_INSTANCES = 1  # Prevent overlapping scheduler runs
