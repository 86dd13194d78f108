# Perfume storefront API
