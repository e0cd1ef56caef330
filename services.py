import re, secrets, smtplib, time
from decimal import Decimal
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from flask import current_app

ORDER_NUMBER_RE = re.compile(r"^ORD-\d{13,}-[0-9A-F]{10}$")


def send_email(subject, body, to_email):
    """Best-effort staff notification; failures are logged, never raised."""
    auth_user = current_app.config.get('EMAIL_USER')
    auth_password = current_app.config.get('EMAIL_PASS')
    if not to_email or not auth_user:
        current_app.logger.debug('Skipping email %r: mail is not configured', subject)
        return False

    msg = MIMEMultipart()
    msg['From'] = current_app.config.get('MAIL_SENDER')
    msg['To'], msg['Subject'] = to_email, subject
    msg.attach(MIMEText(body, 'plain'))

    try:
        server = smtplib.SMTP(current_app.config['SMTP_SERVER'], current_app.config['SMTP_PORT'])
        server.starttls()
        server.login(auth_user, auth_password)
        server.sendmail(msg['From'], to_email, msg.as_string())
        server.quit()
    except (smtplib.SMTPException, OSError):
        current_app.logger.exception('Failed to send email %r', subject)
        return False
    return True


def generate_order_number():
    # epoch millis + 40 random bits; the unique constraint catches the rare clash
    return f"ORD-{int(time.time() * 1000)}-{secrets.token_hex(5).upper()}"


def format_money(value) -> str:
    return f"${Decimal(value or 0):.2f}"


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug[:255].rstrip("-")


def order_summary(order) -> str:
    lines = [f"- product #{item.product_id} (x{item.quantity}): {format_money(item.total_price)}"
             for item in order.items]
    return (
        f"Order {order.order_number}\n\n"
        "Items:\n" + "\n".join(lines) + "\n\n"
        f"Total: {format_money(order.total_amount)}\n"
        f"Payment: {order.payment_method}\n\n"
        "Customer Information:\n"
        f"Name: {order.customer_name}\n"
        f"Email: {order.customer_email or 'No Email Provided'}\n"
        f"Phone: {order.customer_phone}\n"
        f"Address: {order.customer_address}\n"
        f"Notes: {order.notes or '-'}\n"
    )
