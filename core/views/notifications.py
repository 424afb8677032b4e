from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.serializers.notifications import NotificationReadSerializer
from core.models import Notification
from core.realtime.notify import notify_change


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notifications_list(request):
    qs = Notification.objects.filter(user=request.user).order_by('-created_at', '-id')[:100]
    return Response({'ok': True, 'data': [{
        'id': n.id,
        'message': n.message,
        'isRead': n.is_read,
        'createdAt': n.created_at.isoformat(),
    } for n in qs]})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notifications_mark_read(request):
    """Mark the given ids (or everything, when no ids are sent) as read."""
    s = NotificationReadSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    ids = s.validated_data.get('ids')
    qs = Notification.objects.filter(user=request.user, is_read=False)
    if ids:
        qs = qs.filter(id__in=ids)
    updated = qs.update(is_read=True)
    if updated:
        notify_change('notifications', 'UPDATE')
    return Response({'ok': True, 'updated': updated})
