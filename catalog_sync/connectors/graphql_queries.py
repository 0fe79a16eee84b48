"""
GraphQL documents used against the Shopify Admin API.

Catalog snapshot:
  PRODUCTS_QUERY            products with status and up to N variants each
                            (price / compare-at sync, status sync)
  PRODUCT_VARIANTS_QUERY    every variant with its inventory item and unit
                            cost (cost sync)

Bulk pipeline:
  STAGED_UPLOADS_CREATE     step 1, request an upload target
  BULK_OPERATION_RUN        step 4, start the bulk mutation from the file
  CURRENT_BULK_OPERATION    one-shot status read, never polled

Per-kind mutations run once per JSONL line by the bulk operation:
  PRICE_UPDATE_MUTATION, STATUS_UPDATE_MUTATION, COST_UPDATE_MUTATION

Page sizes are variables so they follow Settings.
"""

PRODUCTS_QUERY = """
query products($cursor: String, $first: Int!, $variantsFirst: Int!) {
  products(first: $first, after: $cursor) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      node {
        id
        status
        variants(first: $variantsFirst) {
          pageInfo {
            hasNextPage
          }
          edges {
            node {
              id
              barcode
              price
              compareAtPrice
            }
          }
        }
      }
    }
  }
}
"""

PRODUCT_VARIANTS_QUERY = """
query productVariants($cursor: String, $first: Int!) {
  productVariants(first: $first, after: $cursor) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      node {
        id
        barcode
        inventoryItem {
          id
          unitCost {
            amount
          }
        }
      }
    }
  }
}
"""

STAGED_UPLOADS_CREATE = """
mutation stagedUploadsCreate($input: [StagedUploadInput!]!) {
  stagedUploadsCreate(input: $input) {
    stagedTargets {
      url
      resourceUrl
      parameters {
        name
        value
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

BULK_OPERATION_RUN = """
mutation bulkOperationRunMutation($mutation: String!, $stagedUploadPath: String!) {
  bulkOperationRunMutation(mutation: $mutation, stagedUploadPath: $stagedUploadPath) {
    bulkOperation {
      id
      status
    }
    userErrors {
      field
      message
    }
  }
}
"""

CURRENT_BULK_OPERATION = """
query {
  currentBulkOperation(type: MUTATION) {
    id
    status
    errorCode
    objectCount
    url
  }
}
"""

PRICE_UPDATE_MUTATION = """
mutation productVariantUpdate($input: ProductVariantInput!) {
  productVariantUpdate(input: $input) {
    productVariant { id price compareAtPrice }
    userErrors { field message }
  }
}
"""

STATUS_UPDATE_MUTATION = """
mutation productUpdate($input: ProductInput!) {
  productUpdate(input: $input) {
    product { id status }
    userErrors { field message }
  }
}
"""

COST_UPDATE_MUTATION = """
mutation inventoryItemUpdate($input: InventoryItemInput!) {
  inventoryItemUpdate(input: $input) {
    inventoryItem { id unitCost { amount } }
    userErrors { field message }
  }
}
"""
