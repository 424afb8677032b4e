from rest_framework import serializers

class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('username is required')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('password is required')
        return v

class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)

class AdminSignupSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)
    fullName = serializers.CharField(max_length=255)
    hostelName = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)

class StudentSignupSerializer(AdminSignupSerializer):
    phoneNumber = serializers.RegexField(r'^\+?\d{10,15}$', required=False, allow_blank=True,
                                         error_messages={'invalid': 'Phone number must have 10 to 15 digits'})
    roomNumber = serializers.CharField(max_length=20, required=False, allow_blank=True)
