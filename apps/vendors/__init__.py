"""Vendors app package.

Vendors are the sellers of bookable time. Each vendor works in a fixed
UTC offset; this app owns the vendor records, the pure generator of the
daily half-hour slots and the availability reader that overlays slot
claims on top of the generated grid.
"""
