from rest_framework import serializers


class NotificationReadSerializer(serializers.Serializer):
    # 不传 ids 表示全部标记为已读
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, allow_empty=True)
