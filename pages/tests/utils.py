from django.utils.text import slugify

from pages.models import Page


def create_page(*, title="Test Page", slug=None, gallery=(), **kwargs):
    if slug is None:
        slug = slugify(title, allow_unicode=True)
    page = Page(title=title, slug=slug, **kwargs)
    page.full_clean()
    page.save()
    if gallery:
        page.gallery.set(gallery)
    return page
