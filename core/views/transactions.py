from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from core.permissions import IsAdminRole, IsStudentRole
from core.serializers.transactions import (
    PaymentConfirmSerializer,
    PaymentRecordSerializer,
    ReminderSerializer,
    TransactionListQuerySerializer,
    TransactionReviewSerializer,
)
from core.services.transactions import (
    confirm_payment,
    format_transaction,
    list_transactions,
    record_payment,
    review_transaction,
    send_reminder,
)
from core.session import session_for


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transactions_list(request):
    q = TransactionListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    items = list_transactions(
        session_for(request.user),
        status=q.validated_data.get('status'),
        reminders_only=q.validated_data['remindersOnly'],
    )
    return Response({'ok': True, 'data': [format_transaction(t) for t in items]})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def transaction_reminder(request):
    s = ReminderSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    t = send_reminder(
        session_for(request.user),
        student_id=v.get('studentId'), amount=v.get('amount'),
        description=v.get('description'), due_date=v.get('dueDate'),
    )
    return Response({'ok': True, 'data': format_transaction(t)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudentRole])
def transaction_pay(request):
    s = PaymentConfirmSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    t = confirm_payment(session_for(request.user), v['id'], amount=v['amount'], description=v.get('description'))
    return Response({'ok': True, 'data': format_transaction(t)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStudentRole])
def transaction_record(request):
    s = PaymentRecordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    t = record_payment(session_for(request.user), amount=v['amount'], description=v.get('description', ''))
    return Response({'ok': True, 'data': format_transaction(t)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def transaction_review(request):
    s = TransactionReviewSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    t = review_transaction(session_for(request.user), s.validated_data['id'], s.validated_data['status'])
    return Response({'ok': True, 'data': format_transaction(t)})
