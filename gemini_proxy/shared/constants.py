# Methods routed to the proxy endpoints. Non-POST requests are refused inside
# the endpoint so that the credential check runs before the method check.
ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
