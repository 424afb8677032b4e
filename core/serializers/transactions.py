from rest_framework import serializers

class ReminderSerializer(serializers.Serializer):
    # amount/dueDate are checked by the service so the client gets its usual messages
    studentId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    amount = serializers.CharField(max_length=32, required=False, allow_blank=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    dueDate = serializers.CharField(max_length=10, required=False, allow_blank=True)

class PaymentConfirmSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    amount = serializers.CharField(max_length=32)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)

class PaymentRecordSerializer(serializers.Serializer):
    amount = serializers.CharField(max_length=32)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)

class TransactionReviewSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    status = serializers.ChoiceField(choices=['approved', 'rejected'])

class TransactionListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['pending', 'approved', 'rejected'], required=False)
    remindersOnly = serializers.BooleanField(required=False, default=False)
