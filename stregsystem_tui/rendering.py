"""Rich text renderers for panels and modals."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from stregsystem_tui.formatters import sanitize_html, truncate_text, wrap_words
from stregsystem_tui.modals.error import ErrorModal
from stregsystem_tui.modals.parking import PHONE_FIELD, PLATE_FIELD, ParkingModal
from stregsystem_tui.modals.purchase import PurchaseModal
from stregsystem_tui.modals.qr_payment import QrPaymentModal
from stregsystem_tui.modals.search import SearchModal
from stregsystem_tui.modals.terminal_size import TerminalSizeModal
from stregsystem_tui.modals.username import UsernameModal
from stregsystem_tui.models import BalanceTier, MemberInfo, Sale
from stregsystem_tui.state import AppState, InputMode

APP_TITLE = "Stregsystemet-TUI"


def balance_style(tier: BalanceTier) -> str:
    """Return a consistent style for a balance tier."""
    if tier is BalanceTier.HIGH:
        return "bold green"
    if tier is BalanceTier.MID:
        return "bold yellow"
    return "bold red"


def render_title(now: datetime) -> Text:
    text = Text()
    text.append(APP_TITLE, style="bold green")
    text.append("   ")
    text.append(now.strftime("%d/%m - %Y  %H:%M:%S"), style="bold blue")
    return text


def product_window(count: int, rows: int, selected: int) -> range:
    """Indices of the products that fit in ``rows`` lines, keeping ``selected`` in view."""
    if count <= rows:
        return range(count)
    # Two lines go to the scroll markers once the list overflows.
    shown = max(1, rows - 2)
    start = min(max(0, selected - shown // 2), count - shown)
    return range(start, start + shown)


def render_products(state: AppState, rows: int) -> Text:
    """The catalog as one line per product, scrolled to keep the cursor visible."""
    if state.products.error:
        text = Text("Could not load products\n", style="bold red")
        text.append(state.products.error, style="red")
        return text

    products = state.sorted_products()
    if not products:
        return Text("Loading products...", style="dim")

    alias_error = state.products.named_products_error
    if alias_error:
        rows -= 2
    selected = state.products.selected_index
    targets = set(state.get_movement_target_indices())
    window = product_window(len(products), rows, selected)
    price_width = max(len(str(product.price)) for product in products)

    lines = Text()
    if window.start > 0:
        lines.append("⋮\n", style="dim")

    for idx in window:
        if idx > window.start:
            lines.append("\n")
        product = products[idx]
        pointer = "➤ " if idx == selected else "  "
        style = "bold reverse" if idx == selected else ("underline" if idx in targets else "")
        lines.append(pointer)
        lines.append(f"{product.id:>5}  ", style="dim")
        lines.append(f"{str(product.price):>{price_width}}  ", style="yellow")
        lines.append(product.name, style=style)

    if window.stop < len(products):
        lines.append("\n⋮", style="dim")

    if alias_error:
        lines.append(f"\n\nSearch aliases unavailable: {alias_error}", style="dim red")
    return lines


def _render_member(member: MemberInfo) -> Text:
    text = Text()
    text.append(" Name: ", style="bold grey70")
    text.append(member.name, style="white")
    text.append("\n Balance: ", style="bold grey70")
    text.append(str(member.balance), style=balance_style(member.tier))
    return text


def _render_sales(sales: list[Sale], width: int) -> Text:
    text = Text("\n\n Recent Purchases:\n", style="bold")
    if not sales:
        text.append("   No recent purchases", style="grey50")
        return text

    price_width = max(len(str(sale.price)) for sale in sales)
    name_width = max(10, width - price_width - 5)
    for sale in sales:
        label = truncate_text(sanitize_html(sale.product), name_width)
        text.append(f" {sale.formatted_timestamp()}\n", style="bold grey50")
        text.append(" ∟ ", style="grey50")
        text.append(f"{label:<{name_width}}", style="grey70")
        text.append(f"{str(sale.price):>{price_width}}\n\n", style="yellow")
    return text


def render_user_panel(state: AppState, width: int = 50) -> Text:
    error = state.user.error
    if error is not None:
        not_found = "does not exist" in error or "not found" in error
        title, hint = ("User Not Found", "Press 'u' to change username") if not_found else ("Error", "Please try again later")
        text = Text(f"{title}\n\n", style="bold red")
        lines = wrap_words(error, max(10, width - 6))
        if len(lines) > 4:
            lines = lines[:3] + ["..."]
        text.append("\n".join(lines), style="red")
        text.append(f"\n\n{hint}", style="yellow")
        return text

    member = state.user.member_info
    if member is None:
        return Text("No user information available", style="yellow")

    text = _render_member(member)
    text.append_text(_render_sales(state.user.latest_sales, width))
    return text


def render_help(state: AppState) -> Text:
    if state.mode is InputMode.EDITING_INITIAL_USERNAME:
        text = Text("Welcome! Enter your stregsystem username: ", style="bold")
        text.append(f"{state.ui.input}|", style="bold white")
        if state.ui.input_error:
            text.append(f"   {state.ui.input_error}", style="red")
        return text
    prefix = f"  [{state.ui.number_prefix}]" if state.ui.number_prefix else ""
    return Text(
        "j/k move  gg/G top/bottom  Enter buy  / search  u user  p parking  m MobilePay  r reload  q quit" + prefix,
        style="dim",
    )


def _render_username(modal: UsernameModal) -> Text:
    text = Text("Change username\n\n", style="bold white")
    text.append(f"{modal.input}|", style="bold white")
    if modal.error:
        text.append(f"\n{modal.error}", style="#ffb3b3")
    text.append("\n\nEnter save. Esc cancel.", style="#dddddd")
    return text


def _render_purchase(modal: PurchaseModal, state: AppState) -> Text:
    product = state.products.items.get(modal.product_id)
    text = Text("Confirm purchase\n\n", style="bold white")
    if product is None:
        text.append("Product is no longer available.", style="red")
        return text

    text.append(f"{product.name}\n", style="bold white")
    text.append(f"Quantity: ◀ {modal.quantity} ▶\n", style="white")
    text.append(f"Total: {product.price * modal.quantity}\n", style="yellow")
    if modal.success:
        text.append("\nPurchase successful!", style="bold green")
        text.append("\n\nPress any key to close.", style="#dddddd")
    elif modal.error:
        text.append(f"\n{modal.error}", style="#ffb3b3")
        text.append("\n\nPress any key to close.", style="#dddddd")
    else:
        text.append("\ny confirm  n/Esc cancel  +/- quantity", style="#dddddd")
    return text


def _render_search(modal: SearchModal) -> Text:
    text = Text("Search\n\n", style="bold white")
    text.append(f"> {modal.input}|\n\n", style="bold white")
    if not modal.input.strip():
        text.append("Type a product name, id or alias", style="dim")
    elif not modal.results:
        text.append("No results", style="dim")
    for idx, product in enumerate(modal.results):
        if idx > 0:
            text.append("\n")
        pointer = "➤ " if idx == modal.selected_index else "  "
        style = "bold reverse" if idx == modal.selected_index else "white"
        text.append(f"{pointer}{product.id:>5}  {product.name}  ", style=style)
        text.append(str(product.price), style="yellow")
    text.append("\n\n↑/↓ select  Enter jump  Esc close", style="#dddddd")
    return text


def _render_error(modal: ErrorModal) -> Text:
    text = Text(f"{modal.title}\n\n", style="bold red")
    text.append(modal.message, style="white")
    text.append("\n\nPress any key to close.", style="#dddddd")
    return text


def _render_parking(modal: ParkingModal) -> Text:
    text = Text("Parking registration\n\n", style="bold white")
    if modal.confirming:
        text.append(f"Phone: +45 {modal.phone_input}\n", style="white")
        text.append(f"Plate: {modal.license_plate_input}\n", style="white")
        if modal.vehicle is not None and modal.vehicle.describe():
            text.append(f"Vehicle: {modal.vehicle.describe()}\n", style="white")
        if modal.success:
            text.append("\nParking registered!", style="bold green")
            text.append("\n\nPress any key to close.", style="#dddddd")
        elif modal.error:
            text.append(f"\n{modal.error}", style="#ffb3b3")
            text.append("\n\nPress any key to close.", style="#dddddd")
        else:
            text.append("\nRegister this vehicle? y confirm  n/Esc cancel", style="#dddddd")
        return text

    for field_idx, label, value in (
        (PHONE_FIELD, "Phone", modal.phone_input),
        (PLATE_FIELD, "Plate", modal.license_plate_input),
    ):
        active = field_idx == modal.current_field
        pointer = "➤ " if active else "  "
        cursor = "|" if active else ""
        text.append(f"{pointer}{label}: {value}{cursor}\n", style="bold white" if active else "white")
    if modal.input_error:
        text.append(f"\n{modal.input_error}", style="#ffb3b3")
    text.append("\n\nTab switch field  Enter continue  Esc cancel", style="#dddddd")
    return text


def _render_terminal_size(modal: TerminalSizeModal) -> Text:
    text = Text("Terminal too small\n\n", style="bold red")
    text.append(f"Current: {modal.width}x{modal.height}\n", style="white")
    text.append(f"Required: {modal.min_width}x{modal.min_height}\n", style="white")
    text.append("\nResize the window or press q to quit.", style="#dddddd")
    return text


def _render_qr_payment(modal: QrPaymentModal) -> Text:
    text = Text("MobilePay top-up\n\n", style="bold white")
    if modal.qr_data is not None:
        text.append(modal.qr_data.to_text(), style="black on white")
        text.append(f"\n\n{modal.qr_data.amount} for {modal.qr_data.username}", style="bold white")
        text.append("\n\nb/Backspace change amount  Esc/q close", style="#dddddd")
        return text

    text.append(f"Amount (DKK): {modal.amount_input}|", style="bold white")
    if modal.error:
        text.append(f"\n{modal.error}", style="#ffb3b3")
    text.append("\n\nEnter generate QR  Esc cancel", style="#dddddd")
    return text


def render_modal(state: AppState) -> Text | None:
    """Render the modal that owns input, or ``None`` when no modal is open."""
    modal = state.active_modal
    if isinstance(modal, UsernameModal):
        return _render_username(modal)
    if isinstance(modal, PurchaseModal):
        return _render_purchase(modal, state)
    if isinstance(modal, SearchModal):
        return _render_search(modal)
    if isinstance(modal, ErrorModal):
        return _render_error(modal)
    if isinstance(modal, ParkingModal):
        return _render_parking(modal)
    if isinstance(modal, TerminalSizeModal):
        return _render_terminal_size(modal)
    if isinstance(modal, QrPaymentModal):
        return _render_qr_payment(modal)
    return None
