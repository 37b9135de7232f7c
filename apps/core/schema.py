"""
Custom AutoSchema for automatic tag assignment
"""
from drf_spectacular.openapi import AutoSchema


class CustomAutoSchema(AutoSchema):
    """
    Custom schema that automatically assigns tags based on ViewSet and action
    """

    def get_tags(self):
        """Auto-assign tags based on ViewSet class and action"""
        tags = super().get_tags()

        if tags:
            return tags

        view_name = self.view.__class__.__name__
        action = getattr(self.view, 'action', None)

        tag_mapping = {
            'ShopViewSet': self._get_shop_tag(action),
            'JoinRequestViewSet': ['Join Requests'],
            'BookingViewSet': ['Bookings'],
            'BarberViewSet': ['Barbers'],
            'PaymentViewSet': ['Payments'],
        }

        return tag_mapping.get(view_name, ['api'])

    def _get_shop_tag(self, action):
        """Get tag for shop endpoints"""
        owner_actions = ['create', 'capacity', 'hours', 'contact', 'leave']
        if action in owner_actions:
            return ['Shops - Owner']
        return ['Shops - Public']
