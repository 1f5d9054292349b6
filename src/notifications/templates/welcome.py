"""Welcome email, sent once a customer account has been created."""


class WelcomeTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        first_name = context.get("first_name") or "there"
        return {
            "subject": f"Welcome to Storefront, {first_name}!",
            "body": (
                f"Hi {first_name},\n\n"
                "Thank you for creating an account. You can now save a shipping "
                "address, keep cards on file and place orders.\n\n"
                "Happy shopping!\n"
                "The Storefront Team"
            ),
        }
