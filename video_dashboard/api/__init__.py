from .api_responses_api import ApiResponsesApi
from .auth_api import AuthApi
from .dashboard_api import DashboardApi
from .downloads import download_url
from .processing_steps_api import ProcessingStepsApi
from .users_api import UsersApi
from .video_projects_api import VideoProjectsApi

__all__ = [
    'ApiResponsesApi',
    'AuthApi',
    'DashboardApi',
    'ProcessingStepsApi',
    'UsersApi',
    'VideoProjectsApi',
    'download_url',
]
