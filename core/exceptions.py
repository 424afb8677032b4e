"""
Error taxonomy of the hostel services and the unified API error handler.

Services raise these exceptions; DRF turns them into responses through
:func:`api_exception_handler`, which gives every error the same
``{'ok': False, 'error': {'code': ..., 'message': ...}}`` shape.
"""
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response


class HostelError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'request failed'
    default_code = 'hostel_error'


class ValidationError(HostelError):
    """Bad or missing input; never retried automatically."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'invalid input'
    default_code = 'validation_error'


class CapacityExceeded(HostelError):
    """The target room is full; refresh the room list and pick another."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'room is full'
    default_code = 'capacity_exceeded'


class NotFoundError(HostelError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'not found'
    default_code = 'not_found'


class StoreError(HostelError):
    """A read or write against the database failed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'storage unavailable, please retry'
    default_code = 'store_error'


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    code = 'api_error'
    if isinstance(exc, HostelError):
        code = exc.default_code
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code)
