from rest_framework import serializers

class AttendanceMarkItemSerializer(serializers.Serializer):
    studentId = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=['present', 'absent'])

class AttendanceMarkSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    marks = AttendanceMarkItemSerializer(many=True, allow_empty=False)
