"""Views for the main landing page"""
from django.conf import settings
from django.shortcuts import render
from django.views import View

from shelves.fallbacks import FALLBACK_SHELVES
from shelves.services import refresher
from shelves.services.classifier import SHELF_ORDER, SHELF_TITLES


class HomeView(View):
    """Display the three music shelves"""

    def get(self, request):
        result = refresher.default_refresher.current()

        sections = []
        for shelf in SHELF_ORDER:
            items = result.shelf(shelf)
            sections.append({
                'key': shelf,
                'title': SHELF_TITLES[shelf],
                'items': items or FALLBACK_SHELVES[shelf],
                'is_fallback': not items,
            })

        context = {
            'sections': sections,
            'generated_at': result.generated_at,
            'poll_interval_ms': int(getattr(settings, 'SHELVES_POLL_INTERVAL', 5)) * 1000,
        }
        return render(request, 'shelves/home.html', context)
