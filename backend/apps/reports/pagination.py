from rest_framework.pagination import PageNumberPagination


class TransactionPagination(PageNumberPagination):
    page_size = 25
    page_size_query_param = "limit"
    max_page_size = 200
