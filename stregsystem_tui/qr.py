"""MobilePay payment links rendered as terminal QR codes."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlencode

import qrcode

from stregsystem_tui.config import MOBILEPAY_NUMBER
from stregsystem_tui.money import Money


def mobilepay_url(username: str, amount: Money) -> str:
    query = urlencode(
        {"phone": MOBILEPAY_NUMBER, "comment": username, "amount": f"{amount.kroner}.{amount.minor:02d}"}
    )
    return f"mobilepay://send?{query}"


@dataclass(frozen=True)
class PaymentQrData:
    """A top-up request for ``username`` and its QR module matrix."""

    username: str
    amount: Money
    url: str
    matrix: list[list[bool]] = field(repr=False)

    @classmethod
    def create(cls, username: str, amount: Money) -> PaymentQrData:
        url = mobilepay_url(username, amount)
        code = qrcode.QRCode(border=1, error_correction=qrcode.constants.ERROR_CORRECT_M)
        code.add_data(url)
        code.make(fit=True)
        return cls(username=username, amount=amount, url=url, matrix=code.get_matrix())

    def to_text(self) -> str:
        """Two module rows per text line using half-block characters."""
        rows = self.matrix
        lines = []
        for top in range(0, len(rows), 2):
            upper = rows[top]
            lower = rows[top + 1] if top + 1 < len(rows) else [False] * len(upper)
            line = []
            for a, b in zip(upper, lower):
                if a and b:
                    line.append("█")
                elif a:
                    line.append("▀")
                elif b:
                    line.append("▄")
                else:
                    line.append(" ")
            lines.append("".join(line))
        return "\n".join(lines)
