"""Order confirmation email, sent after an order has been recorded."""


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        product_name = context.get("product_name", "your item")
        quantity = context.get("quantity", 1)
        total = context.get("total", 0.0)
        return {
            "subject": f"Order #{order_id} confirmed",
            "body": (
                f"Your order #{order_id} has been placed.\n\n"
                f"{quantity} x {product_name}\n"
                f"Order total: {total:.2f}\n\n"
                "We'll let you know once it ships.\n\n"
                "Thank you for shopping with Storefront!"
            ),
        }
