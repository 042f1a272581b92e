# Email notifications; every send is best-effort
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from flask import current_app

class NotificationService:
    def __init__(self, smtp_server, smtp_port, username=None, password=None,
                 from_email='noreply@restaurant-api.local', frontend_url='http://localhost:3000'):
        self.smtp_server = smtp_server
        self.smtp_port = int(smtp_port)
        self.smtp_username = username
        self.smtp_password = password
        self.from_email = from_email
        self.frontend_url = frontend_url.rstrip('/')

    @classmethod
    def from_config(cls, config):
        return cls(
            smtp_server=config.get('SMTP_SERVER', 'smtp.gmail.com'),
            smtp_port=config.get('SMTP_PORT', 587),
            username=config.get('SMTP_USERNAME'),
            password=config.get('SMTP_PASSWORD'),
            from_email=config.get('FROM_EMAIL', 'noreply@restaurant-api.local'),
            frontend_url=config.get('FRONTEND_URL', 'http://localhost:3000')
        )

    def send_email(self, to_email, subject, body):
        """Send an HTML email. Returns False instead of raising."""
        try:
            if not self.smtp_username or not self.smtp_password:
                current_app.logger.warning("SMTP credentials not configured, skipping email")
                return False

            msg = MIMEMultipart()
            msg['From'] = self.from_email
            msg['To'] = to_email
            msg['Subject'] = subject
            msg.attach(MIMEText(body, 'html'))

            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.sendmail(self.from_email, to_email, msg.as_string())

            current_app.logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            current_app.logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    def send_welcome_email(self, user):
        subject = "Welcome to Restaurant API"
        body = f"""
        <html>
        <body>
            <h2>Welcome, {user.name}!</h2>
            <p>Your account has been created.</p>
            <p>Your email confirmation code is: <strong>{user.confirmation_code}</strong></p>
            <p>Enter it in the app to verify your email address.</p>
        </body>
        </html>
        """
        return self.send_email(user.email, subject, body)

    def send_password_reset_email(self, email, reset_token):
        reset_url = f"{self.frontend_url}/reset-password?token={reset_token}"
        subject = "Password Reset Request"
        body = f"""
        <html>
        <body>
            <h2>Password Reset</h2>
            <p>We received a request to reset your password.</p>
            <p><a href="{reset_url}">Reset your password</a></p>
            <p>This link expires in one hour. If you did not ask for a reset you can ignore this email.</p>
        </body>
        </html>
        """
        return self.send_email(email, subject, body)

    def send_order_confirmation_email(self, email, order_details):
        order_id = order_details.get('id')
        restaurant_name = order_details.get('restaurant') or 'the restaurant'
        total = order_details.get('final_price')
        eta = order_details.get('estimated_delivery_time')

        subject = f"Order Confirmed - #{order_id}"
        body = f"""
        <html>
        <body>
            <h2>Order Confirmation</h2>
            <p>Your order has been placed!</p>
            <div style="background-color: #f5f5f5; padding: 15px; border-radius: 5px; margin: 20px 0;">
                <p><strong>Order ID:</strong> #{order_id}</p>
                <p><strong>Restaurant:</strong> {restaurant_name}</p>
                <p><strong>Total Amount:</strong> ${total}</p>
                <p><strong>Estimated delivery:</strong> {eta}</p>
            </div>
        </body>
        </html>
        """
        return self.send_email(email, subject, body)
