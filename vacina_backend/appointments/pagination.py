from django.conf import settings

from rest_framework.pagination import PageNumberPagination

from .services.listing import clamp_page_size


class ReceptionPagination(PageNumberPagination):
    """Roster pagination.

    ``?per_page=`` is clamped to ``[VACINA_DEFAULT_PAGE_SIZE, VACINA_MAX_PAGE_SIZE]``;
    ``?export=1`` returns the whole day in a single page of the maximum size.
    """

    page_size_query_param = 'per_page'

    @property
    def page_size(self):
        return settings.VACINA_DEFAULT_PAGE_SIZE

    @property
    def max_page_size(self):
        return settings.VACINA_MAX_PAGE_SIZE

    def get_page_size(self, request):
        if request.query_params.get('export') in ('1', 'true'):
            return self.max_page_size
        raw = request.query_params.get(self.page_size_query_param)
        if raw is None:
            return self.page_size
        return clamp_page_size(raw)
