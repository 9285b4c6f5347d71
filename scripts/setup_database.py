#!/usr/bin/env python3
"""
Database Setup Script

Initialize MongoDB indexes and verify connection
"""

import click
from news_portal.database.mongodb_client import MongoDBClient


@click.command()
def main():
  """Setup and verify database"""
  
  print("="*80)
  print("DATABASE SETUP")
  print("="*80)
  
  try:
    # Initialize client (creates missing indexes)
    print("\nConnecting to MongoDB...")
    db = MongoDBClient()
    db.ping()
    
    # Get statistics
    stats = db.get_statistics()
    
    print("\n✓ Database connection successful!")
    print("\nCurrent Statistics:")
    print(f"  Total articles: {stats['total_articles']}")
    print(f"  Published articles: {stats['published_articles']}")
    print(f"  Categories: {stats['categories']}")
    print(f"  Authors: {stats['authors']}")
    
    if stats['date_range']['oldest']:
      print(f"  Date range: {stats['date_range']['oldest'].date()} to {stats['date_range']['newest'].date()}")
    else:
      print("  Date range: No published articles yet")
    
    print("\n✓ Database is ready for use!")
    
  except Exception as e:
    print(f"\n✗ Error: {e}")
    print("\nTroubleshooting:")
    print("  1. Ensure MongoDB is running (mongod)")
    print("  2. Check MONGODB_URI in .env or the connection string in config/config.yaml")
    print("  3. Verify network connectivity")
    raise SystemExit(1)


if __name__ == "__main__":
  main()
