from typing import Union

from ..models import DownloadFileType


def download_url(app_base_url: str, project_id: str, file_type: Union[DownloadFileType, str]) -> str:
    """Link for a browser navigation that downloads a project artifact.

    Downloads are served by the app origin, not through the JSON API.
    """
    file_type = DownloadFileType(file_type)
    return f"{app_base_url.rstrip('/')}/api/videos/{project_id}/download/{file_type.value}"
