"""user-data-service: per-user profile, books, pages and words on DynamoDB"""
