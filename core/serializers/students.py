from rest_framework import serializers

class StudentProfileUpdateSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=255, required=False)
    phoneNumber = serializers.RegexField(r'^\+?\d{10,15}$', required=False, allow_blank=True)
