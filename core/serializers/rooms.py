from rest_framework import serializers

class RoomListQuerySerializer(serializers.Serializer):
    includeEmpty = serializers.BooleanField(required=False, default=False)

class RoomCreateSerializer(serializers.Serializer):
    roomNumber = serializers.CharField(max_length=20)
    capacity = serializers.IntegerField(min_value=1, max_value=50, required=False)

class RoomAllocateSerializer(serializers.Serializer):
    # 缺失时由服务层统一返回 "missing selection"
    studentId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    roomNumber = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
