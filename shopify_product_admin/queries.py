"""Shopify Admin GraphQL documents used by the catalog.

Every query and mutation the package sends lives here so that the
catalog and the mock client agree on operation names.
"""

PRODUCT_FIELDS = """
  id
  title
  descriptionHtml
  variants(first: 1) {
    edges {
      node {
        id
        price
        inventoryItem {
          id
        }
      }
    }
  }
"""

PRODUCT_CREATE_MUTATION = """
mutation productCreate($input: ProductInput!) {
  productCreate(input: $input) {
    product {%s}
    userErrors {
      field
      message
    }
  }
}
""" % PRODUCT_FIELDS

PRODUCT_UPDATE_MUTATION = """
mutation productUpdate($input: ProductInput!) {
  productUpdate(input: $input) {
    product {%s}
    userErrors {
      field
      message
    }
  }
}
""" % PRODUCT_FIELDS

VARIANTS_BULK_UPDATE_MUTATION = """
mutation productVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
  productVariantsBulkUpdate(productId: $productId, variants: $variants) {
    productVariants {
      id
      price
    }
    userErrors {
      field
      message
    }
  }
}
"""

LOCATIONS_QUERY = """
query locations($first: Int!) {
  locations(first: $first) {
    edges {
      node {
        id
        name
      }
    }
  }
}
"""

INVENTORY_ITEM_UPDATE_MUTATION = """
mutation inventoryItemUpdate($id: ID!, $input: InventoryItemInput!) {
  inventoryItemUpdate(id: $id, input: $input) {
    inventoryItem {
      id
      tracked
    }
    userErrors {
      field
      message
    }
  }
}
"""

INVENTORY_SET_QUANTITIES_MUTATION = """
mutation inventorySetQuantities($input: InventorySetQuantitiesInput!) {
  inventorySetQuantities(input: $input) {
    inventoryAdjustmentGroup {
      createdAt
      reason
    }
    userErrors {
      field
      message
    }
  }
}
"""

INVENTORY_LEVELS_QUERY = """
query inventoryLevels($id: ID!, $first: Int!) {
  inventoryItem(id: $id) {
    id
    inventoryLevels(first: $first) {
      edges {
        node {
          location {
            id
          }
          quantities(names: ["on_hand", "available"]) {
            name
            quantity
          }
        }
      }
    }
  }
}
"""

PRODUCT_DELETE_MUTATION = """
mutation productDelete($input: ProductDeleteInput!) {
  productDelete(input: $input) {
    deletedProductId
    userErrors {
      field
      message
    }
  }
}
"""

PRODUCT_QUERY = """
query product($id: ID!) {
  product(id: $id) {%s}
}
""" % PRODUCT_FIELDS

PRODUCTS_QUERY = """
query products($first: Int!, $levels: Int!) {
  products(first: $first) {
    edges {
      node {
        id
        title
        variants(first: 1) {
          edges {
            node {
              id
              price
              inventoryItem {
                id
                inventoryLevels(first: $levels) {
                  edges {
                    node {
                      location {
                        id
                      }
                      quantities(names: ["on_hand", "available"]) {
                        name
                        quantity
                      }
                    }
                  }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""
