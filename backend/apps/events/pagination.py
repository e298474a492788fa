from rest_framework.pagination import PageNumberPagination


class EventListPagination(PageNumberPagination):
    page_size = 12
    # ?limit= overrides the page size
    page_size_query_param = "limit"
    max_page_size = 100
