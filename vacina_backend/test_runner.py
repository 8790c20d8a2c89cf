from __future__ import annotations

import importlib

from django.conf import settings
from django.test.runner import DiscoverRunner


class VacinaTestRunner(DiscoverRunner):
	"""Test runner that loads each app's ``tests`` package by dotted path."""

	def build_suite(self, test_labels=None, **kwargs):
		"""Build the test suite.

		Filesystem discovery from the project root can trip over the nested
		``<app>/tests/`` packages, so without explicit labels every installed
		``vacina_backend.*`` app contributes ``<app>.tests`` instead.
		"""
		if not test_labels:
			labels: list[str] = []
			for app in settings.INSTALLED_APPS:
				if not app.startswith("vacina_backend."):
					continue
				candidate = f"{app}.tests"
				try:
					importlib.import_module(candidate)
				except ImportError:
					continue
				labels.append(candidate)

			# Fallback: if nothing was importable, keep Django's default behavior.
			test_labels = labels or None

		return super().build_suite(test_labels, **kwargs)
