from typing import Any, List, Type, TypeVar

from pydantic import BaseModel

from ..http_client import ApiClient

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResourceApi:
    """Typed calls for one REST resource"""

    def __init__(self, client: ApiClient):
        self.client = client

    @staticmethod
    def _parse(model: Type[ModelT], data: Any) -> ModelT:
        return model.model_validate(data)

    @staticmethod
    def _parse_list(model: Type[ModelT], data: Any) -> List[ModelT]:
        # An empty body is read as {} by the client
        if not data:
            return []
        return [model.model_validate(item) for item in data]
