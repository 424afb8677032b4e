from rest_framework import serializers

class ComplaintCreateSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=2000)

class ComplaintStatusSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=['pending', 'resolved'])

class ComplaintListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['pending', 'resolved'], required=False)
