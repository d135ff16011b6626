"""Root of the QuickBill exception hierarchy."""


class QuickBillError(Exception):
    """Base exception for every error raised by QuickBill.

    None of these are fatal: the presentation layer catches them,
    shows a message and stays interactive.
    """
    pass
