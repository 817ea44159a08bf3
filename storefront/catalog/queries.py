"""GraphQL documents for the Storefront API."""

PRODUCT_CARD_FIELDS = """
fragment ProductCard on Product {
  id
  title
  handle
  description
  availableForSale
  priceRange {
    minVariantPrice { amount currencyCode }
  }
  images(first: 1) {
    edges { node { url altText } }
  }
  variants(first: 1) {
    edges {
      node {
        id
        title
        priceV2 { amount currencyCode }
        availableForSale
      }
    }
  }
}
"""

GET_COLLECTIONS = """
query GetCollections($first: Int!) {
  collections(first: $first) {
    edges {
      node {
        id
        title
        handle
        description
        image { url altText }
      }
    }
  }
}
"""

GET_COLLECTION_BY_HANDLE = PRODUCT_CARD_FIELDS + """
query GetCollectionByHandle(
  $handle: String!
  $first: Int!
  $sortKey: ProductCollectionSortKeys
  $reverse: Boolean
  $filters: [ProductFilter!]
) {
  collection(handle: $handle) {
    id
    title
    handle
    description
    image { url altText }
    products(first: $first, sortKey: $sortKey, reverse: $reverse, filters: $filters) {
      edges { node { ...ProductCard } }
    }
  }
}
"""

GET_FEATURED_PRODUCTS = PRODUCT_CARD_FIELDS + """
query GetFeaturedProducts($first: Int!) {
  products(first: $first) {
    edges { node { ...ProductCard } }
  }
}
"""

SEARCH_PRODUCTS = PRODUCT_CARD_FIELDS + """
query SearchProducts($query: String!, $first: Int!) {
  products(first: $first, query: $query) {
    edges { node { ...ProductCard } }
  }
}
"""

GET_PRODUCT_BY_HANDLE = """
query GetProductByHandle($handle: String!) {
  product(handle: $handle) {
    id
    title
    handle
    description
    descriptionHtml
    availableForSale
    productType
    vendor
    priceRange {
      minVariantPrice { amount currencyCode }
      maxVariantPrice { amount currencyCode }
    }
    images(first: 10) {
      edges { node { id url altText width height } }
    }
    variants(first: 100) {
      edges {
        node {
          id
          title
          availableForSale
          priceV2 { amount currencyCode }
          compareAtPriceV2 { amount currencyCode }
          selectedOptions { name value }
        }
      }
    }
    options { id name values }
  }
}
"""

CREATE_CHECKOUT = """
mutation CreateCheckout($lineItems: [CheckoutLineItemInput!]!) {
  checkoutCreate(input: { lineItems: $lineItems }) {
    checkout {
      id
      webUrl
    }
    checkoutUserErrors {
      code
      field
      message
    }
  }
}
"""
