from fastapi import HTTPException, status
from typing import Any, Dict, Optional

class NotFoundException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_404_NOT_FOUND
        self.detail = detail or "Not found"

class ForbiddenException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_403_FORBIDDEN
        self.detail = detail or "Forbidden"

class BadRequestException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_400_BAD_REQUEST
        self.detail = detail or "Bad request"

class UnauthorizedException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_401_UNAUTHORIZED
        self.detail = detail or "Unauthorized"

class ConflictException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_409_CONFLICT
        self.detail = detail or "Conflict"

class InternalServerException(HTTPException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        self.detail = detail or "Internal server error"

class InvalidStateTransitionException(BadRequestException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "Invalid state transition", headers)

class NotJoinedException(InvalidStateTransitionException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "You aren't joined to this course", headers)

class NotStartedException(InvalidStateTransitionException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "You haven't started this course", headers)

class AlreadyStartedException(InvalidStateTransitionException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "You already started the course", headers)

class AlreadyFinishedException(InvalidStateTransitionException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "You already finished the course", headers)

class NotFinishedException(InvalidStateTransitionException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "You haven't finished this course", headers)

class InvalidAnswerException(BadRequestException):
    def __init__(self,detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(detail or "The answer does not belong to this question", headers)

def integrity_error_to_conflict(e: Exception, entity: str) -> ConflictException:
    error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)
    main_error = error_msg.split('\n')[0]
    return ConflictException(detail=f"{entity} already exists. {main_error}")
