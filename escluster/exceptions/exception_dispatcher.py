from __future__ import annotations

import json
import os
from typing import Optional, Type, Dict

from escluster.exceptions.cluster_exceptions import (
    ClusterException,
    IndexNotFoundException,
    SecurityException,
    CircuitBreakingException,
)


class ExceptionDispatcher:
    __TYPES: Dict[str, Type[ClusterException]] = {
        "index_not_found_exception": IndexNotFoundException,
        "security_exception": SecurityException,
        "circuit_breaking_exception": CircuitBreakingException,
    }

    class ExceptionSchema:
        def __init__(self, url: str = None, object_type: str = None, reason: str = None, status: int = None):
            self.url = url
            self.type = object_type
            self.reason = reason
            self.status = status

        @classmethod
        def from_json(cls, json_dict: dict, url: str) -> ExceptionDispatcher.ExceptionSchema:
            error = json_dict.get("error")
            status = json_dict.get("status")
            if isinstance(error, dict):
                return cls(url, error.get("type"), error.get("reason"), status)
            return cls(url, None, error, status)

    @staticmethod
    def get(schema: ExceptionDispatcher.ExceptionSchema, code: int, inner: Exception = None) -> ClusterException:
        error = f"{schema.reason}{os.linesep}The server at {schema.url} responded with status code: {code}"

        error_type = ExceptionDispatcher.__get_type(schema.type)
        if error_type is None:
            return ClusterException(error, inner)

        return error_type(error, inner)

    @staticmethod
    def from_response_body(body: str, code: int, url: str) -> ClusterException:
        try:
            json_dict = json.loads(body)
        except ValueError as e:
            return ClusterException(f"{body}{os.linesep}The server at {url} responded with status code: {code}", e)

        if not isinstance(json_dict, dict):
            return ClusterException.generic(f"The server at {url} responded with status code: {code}", body)

        return ExceptionDispatcher.get(ExceptionDispatcher.ExceptionSchema.from_json(json_dict, url), code)

    @staticmethod
    def __get_type(type_as_string: Optional[str]) -> Optional[Type[ClusterException]]:
        if not type_as_string:
            return None
        return ExceptionDispatcher.__TYPES.get(type_as_string)
