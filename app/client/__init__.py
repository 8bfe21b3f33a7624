from app.client.checkout import CheckoutClient, CheckoutError, SetupFlowResult

__all__ = ["CheckoutClient", "CheckoutError", "SetupFlowResult"]
